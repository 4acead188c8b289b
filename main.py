import argparse
from dark_forest.config import EngineParams, EngineControls, load_params
from dark_forest.simulation import Engine
from dark_forest.plotting import (
    plot_run_metrics,
    plot_batch_summary,
    plot_galaxy,
    plot_starfield,
)
from dark_forest.starfield import build_starfield
from dark_forest.utils import ensure_dir
from dark_forest.metrics import Metrics, BatchAggregator
from dark_forest.logging_config import configure_logging


def build_params(args) -> EngineParams:
    params = load_params(args.params) if args.params else EngineParams()
    overrides = {}
    if args.civ_spawn_prob is not None:
        overrides["civ_spawn_prob"] = args.civ_spawn_prob
    if args.max_civs is not None:
        overrides["max_civs"] = args.max_civs
    if args.max_stars is not None:
        overrides["max_stars"] = args.max_stars
    if args.extended:
        overrides["extended_conflict"] = True
    return params.with_overrides(**overrides) if overrides else params


def build_engine(params: EngineParams, seed: int, args) -> Engine:
    controls = EngineControls(violence=not args.no_violence, expansion=not args.no_expansion)
    return Engine(params, seed, controls=controls)


def run_once(engine: Engine, steps: int, out_dir: str, verbose: bool = False):
    metrics = Metrics()
    if verbose:
        done = 0
        while done < steps:
            chunk = min(25, steps - done)
            snap = engine.run(chunk, metrics=metrics)
            done += chunk
            print(f"step {snap.step:5d}  r={snap.radius:7.3f}  stars={engine.star_count:7d}  "
                  f"alive={snap.alive:5d}/{snap.total_civs:<5d}  kills={snap.total_kills}")
    else:
        engine.run(steps, metrics=metrics)
    metrics.export_csv(out_dir)

    outcome = engine.snapshot().to_dict()
    outcome["stars"] = engine.star_count
    return outcome


def run_single(args):
    ensure_dir(args.out)
    params = build_params(args)
    engine = build_engine(params, args.seed, args)
    outcome = run_once(engine, args.steps, args.out, verbose=args.verbose)
    plot_run_metrics(args.out)
    plot_galaxy(engine, args.out)
    if args.starfield:
        field = build_starfield(params, args.starfield)
        plot_starfield(field, args.out)
    print("\n=== Single Run Outcome ===")
    for k, v in outcome.items():
        print(f"{k}: {v}")


def run_batch(args):
    ensure_dir(args.out)
    params = build_params(args)
    agg = BatchAggregator()

    for i in range(args.runs):
        run_dir = f"{args.out}/run_{i+1:02d}"
        ensure_dir(run_dir)
        engine = build_engine(params, args.seed + i, args)
        outcome = run_once(engine, args.steps, run_dir)
        outcome["seed"] = args.seed + i
        agg.add(outcome, run_dir)

    batch_csv = agg.export_csv(args.out)
    plot_batch_summary(batch_csv, args.out)
    print("\n=== Batch Completed ===")
    print(f"Saved batch results: {batch_csv}")
    print(f"Saved plot: {args.out}/plot_batch_summary.png")


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Dark Forest survey simulation")
    p.add_argument("--mode", choices=["single", "batch"], default="single")
    p.add_argument("--steps", type=int, default=400)
    p.add_argument("--runs", type=int, default=10)
    p.add_argument("--seed", type=int, default=42)
    p.add_argument("--out", type=str, default="out/run1")
    p.add_argument("--params", type=str, default=None, help="JSON file of engine parameters")
    p.add_argument("--civ-spawn-prob", type=float, default=None)
    p.add_argument("--max-civs", type=int, default=None)
    p.add_argument("--max-stars", type=int, default=None)
    p.add_argument("--extended", action="store_true", help="tech-aware conflict with retaliation")
    p.add_argument("--no-violence", action="store_true")
    p.add_argument("--no-expansion", action="store_true")
    p.add_argument("--starfield", type=int, default=0,
                   help="also plot a static background field of N stars (single mode)")
    p.add_argument("--log-level", type=str, default=None)
    p.add_argument("--verbose", action="store_true")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.log_level)

    if args.mode == "single":
        run_single(args)
    else:
        run_batch(args)


if __name__ == "__main__":
    main()
