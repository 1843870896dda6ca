import argparse

import matplotlib
matplotlib.use('Agg')

from chisq_lecture import config
from chisq_lecture import data_preprocess
from chisq_lecture.distribution import run_distribution_demo
from chisq_lecture.results_manager import ResultsManager
from chisq_lecture.tests import goodness_of_fit, homogeneity, independence, simulation


def _load_table(loader, path, what):
    """Reads a user table; prints an ERROR and returns None when it cannot be used."""
    print(f"   - Reading {what} from {path}")
    try:
        return loader(path)
    except (OSError, ValueError) as e:
        print(f"ERROR: Could not load {what} from {path}: {e}")
        print("       The steps that need it will be skipped.")
        return None


def main(dataset_id, batch_id, output_dir, gof_input=None, independence_input=None, homogeneity_input=None,
         run_distribution=True, run_gof=True, run_simulation=True, run_independence=True, run_homogeneity=True,
         run_config=config):
    # --- 1. Initialization ---
    print(f"Starting chi-squared analysis - Batch ID: {batch_id}, Dataset ID: {dataset_id}")
    inputs = [p for p in (gof_input, independence_input, homogeneity_input) if p]
    results = ResultsManager(output_dir, batch_id, dataset_id, ", ".join(inputs) if inputs else None)

    # --- 2. Load tables (built-in lecture examples unless a CSV is given) ---
    print("\n--- 2. Loading tables for selected tests ---")
    if run_gof or run_simulation or run_distribution:
        if gof_input:
            df_counts = _load_table(data_preprocess.load_frequency_table, gof_input, "frequency table")
            if df_counts is None:
                run_gof = run_simulation = run_distribution = False
        else:
            print("   - Using the butterfly colour example")
            df_counts = data_preprocess.butterfly_colors()

    if run_independence:
        if independence_input:
            df_independence = _load_table(data_preprocess.load_contingency_table, independence_input,
                                          "independence table")
            if df_independence is None:
                run_independence = False
        else:
            print("   - Using the deer age group x vegetation example")
            df_independence = data_preprocess.deer_vegetation()

    if run_homogeneity:
        if homogeneity_input:
            df_homogeneity = _load_table(data_preprocess.load_contingency_table, homogeneity_input,
                                         "homogeneity table")
            if df_homogeneity is None:
                run_homogeneity = False
        else:
            print("   - Using the meadow butterfly example")
            df_homogeneity = data_preprocess.meadow_butterflies()

    # --- 3. Run tests ---
    print("\n>>> Starting statistical tests <<<")
    all_results = {}

    gof_results = None
    if run_gof:
        print("\n--- 1. Running Goodness-of-Fit Test ---")
        gof_results = goodness_of_fit.run_goodness_of_fit_test(df_counts, run_config, results)
        all_results['goodness_of_fit'] = gof_results

    if run_distribution:
        print("\n--- 2. Rendering Chi-Squared Distribution Charts ---")
        gof_df = gof_results['degrees_of_freedom'] if gof_results else len(df_counts) - 1
        observed_stat = gof_results['chi2_statistic'] if gof_results else None
        all_results['distribution'] = run_distribution_demo(
            run_config, results, observed_stat=observed_stat, gof_df=max(gof_df, 1))

    if run_simulation:
        print("\n--- 3. Running Monte Carlo Null Simulation ---")
        all_results['null_simulation'] = simulation.run_null_simulation(df_counts, run_config, results)

    if run_independence:
        print("\n--- 4. Running Test of Independence ---")
        all_results['independence'] = independence.run_independence_test(df_independence, run_config, results)

    if run_homogeneity:
        print("\n--- 5. Running Test of Homogeneity ---")
        all_results['homogeneity'] = homogeneity.run_homogeneity_test(df_homogeneity, run_config, results)

    # --- 4. Generate final report ---
    results.compile_report()
    print("\n" + "=" * 50)
    print("Analysis pipeline finished!")
    return all_results


def build_parser():
    parser = argparse.ArgumentParser(description="Recompute the chi-squared lecture examples and charts.")
    parser.add_argument('--id', type=str, default=config.DATASET_ID, help='ID for the dataset, used as the output subdirectory.')
    parser.add_argument('--batch-id', type=str, required=True, help='Unique ID for this batch run.')
    parser.add_argument('--output', type=str, default=config.OUTPUTS_DIR, help='Path to the base output directory for results.')
    parser.add_argument('--gof-input', type=str, default=None, help='CSV with columns category,observed[,expected_prob].')
    parser.add_argument('--independence-input', type=str, default=None, help='CSV contingency table (first column = row labels).')
    parser.add_argument('--homogeneity-input', type=str, default=None, help='CSV table with one row per subgroup.')
    parser.add_argument('--no-distribution', dest='run_distribution', action='store_false', help='Do not render the distribution charts.')
    parser.add_argument('--no-gof', dest='run_gof', action='store_false', help='Do not run the goodness-of-fit test.')
    parser.add_argument('--no-simulation', dest='run_simulation', action='store_false', help='Do not run the Monte Carlo null simulation.')
    parser.add_argument('--no-independence', dest='run_independence', action='store_false', help='Do not run the test of independence.')
    parser.add_argument('--no-homogeneity', dest='run_homogeneity', action='store_false', help='Do not run the test of homogeneity.')
    parser.add_argument('--n-simulations', type=int, default=None, help=f'Monte Carlo replicates (default {config.SIMULATION_N_SIMULATIONS}).')
    parser.add_argument('--seed', type=int, default=None, help=f'Random seed (default {config.RANDOM_STATE}).')
    parser.add_argument('--alpha', type=float, default=None, help=f'Significance level (default {config.ALPHA}).')
    parser.add_argument('--jobs', type=int, default=None, help='Number of parallel jobs for the simulation. -1 uses all available cores (default).')
    return parser


def cli(argv=None):
    args = build_parser().parse_args(argv)
    if args.alpha is not None and not 0 < args.alpha < 1:
        raise SystemExit(f"--alpha must be in (0, 1), got {args.alpha}")
    if args.n_simulations is not None and args.n_simulations < 1:
        raise SystemExit(f"--n-simulations must be positive, got {args.n_simulations}")
    if args.seed is not None and args.seed < 0:
        raise SystemExit(f"--seed must be non-negative, got {args.seed}")
    if args.jobs == 0:
        raise SystemExit("--jobs must be a positive number of workers or negative (-1 = all cores), got 0")
    run_config = config.overridden(
        alpha=args.alpha,
        random_state=args.seed,
        simulation_n_simulations=args.n_simulations,
        n_jobs=args.jobs,
    )
    return main(args.id, args.batch_id, args.output,
                gof_input=args.gof_input,
                independence_input=args.independence_input,
                homogeneity_input=args.homogeneity_input,
                run_distribution=args.run_distribution,
                run_gof=args.run_gof,
                run_simulation=args.run_simulation,
                run_independence=args.run_independence,
                run_homogeneity=args.run_homogeneity,
                run_config=run_config)


if __name__ == "__main__":
    cli()
