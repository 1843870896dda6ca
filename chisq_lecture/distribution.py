import numpy as np
import matplotlib.pyplot as plt
from scipy.stats import chi2


def critical_value(alpha, df):
    """Right-tail cutoff: chi2.ppf(1 - alpha, df)."""
    if not 0 < alpha < 1:
        raise ValueError(f"alpha must be in (0, 1), got {alpha}")
    if df < 1:
        raise ValueError(f"df must be at least 1, got {df}")
    return float(chi2.ppf(1 - alpha, df))


def sum_of_squared_normals(df, n_samples, rng):
    """Each draw is Z_1^2 + ... + Z_df^2 for independent standard normals."""
    z = rng.standard_normal((n_samples, df))
    return np.sum(z ** 2, axis=1)


def plot_pdf_family(dfs, grid_size, results_manager):
    x_max = chi2.ppf(0.995, max(dfs))
    x = np.linspace(0.01, x_max, grid_size)
    fig, ax = plt.subplots(figsize=(10, 6))
    for df in dfs:
        ax.plot(x, chi2.pdf(x, df), lw=2, label=f'df = {df}')
    ax.set_ylim(0, 0.5)
    ax.set_xlabel('chi2', fontsize=12)
    ax.set_ylabel('Density', fontsize=12)
    ax.set_title('Chi-squared distributions by degrees of freedom', fontsize=14)
    ax.legend()
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    results_manager.save_plot(fig, "pdf_family.png", test_name="distribution")


def plot_rejection_region(df, alpha, grid_size, results_manager, observed_stat=None):
    crit = critical_value(alpha, df)
    x_max = max(chi2.ppf(0.999, df), (observed_stat or 0) * 1.2)
    x = np.linspace(0.01, x_max, grid_size)
    y = chi2.pdf(x, df)
    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(x, y, color='#1f77b4', lw=2, label=f'chi2 pdf (df = {df})')
    tail = x >= crit
    ax.fill_between(x[tail], y[tail], color='salmon', alpha=0.6, label=f'Rejection region (alpha = {alpha})')
    ax.axvline(crit, color='red', linestyle='--', label=f'Critical value = {crit:.3f}')
    if observed_stat is not None:
        ax.axvline(observed_stat, color='purple', lw=2, label=f'Observed statistic = {observed_stat:.3f}')
    ax.set_xlabel('chi2', fontsize=12)
    ax.set_ylabel('Density', fontsize=12)
    ax.set_title(f'Rejection region for a chi-squared test with df = {df}', fontsize=14)
    ax.legend()
    fig.tight_layout()
    results_manager.save_plot(fig, f"rejection_region_df{df}.png", test_name="distribution")
    return crit


def plot_squared_normals(samples, df, bins, results_manager):
    x = np.linspace(0.01, np.percentile(samples, 99.5), 400)
    fig, ax = plt.subplots(figsize=(10, 6))
    ax.hist(samples, bins=bins, density=True, alpha=0.7, label=f'Simulated sum of {df} squared N(0,1)')
    ax.plot(x, chi2.pdf(x, df), 'r-', lw=2, label=f'chi2 pdf (df = {df})')
    ax.set_xlabel('Value', fontsize=12)
    ax.set_ylabel('Density', fontsize=12)
    ax.set_title('Chi-squared as a sum of squared standard normals', fontsize=14)
    ax.legend()
    fig.tight_layout()
    results_manager.save_plot(fig, "squared_normals.png", test_name="distribution")


def run_distribution_demo(config, results_manager, observed_stat=None, gof_df=3):
    """
    Renders the distribution charts used to introduce the chi-squared test:
    1. The pdf for several degrees of freedom.
    2. The rejection region for the goodness-of-fit example (optionally marking its statistic).
    3. A simulated sum of squared standard normals against the matching pdf.
    """
    print(f"\n ============ Running Chi-Squared Distribution Demo ============")
    alpha = config.ALPHA
    dfs = sorted(set(config.DISTRIBUTION_DFS))

    plot_pdf_family(dfs, config.DISTRIBUTION_GRID_SIZE, results_manager)
    plot_rejection_region(gof_df, alpha, config.DISTRIBUTION_GRID_SIZE, results_manager, observed_stat)

    rng = np.random.default_rng(config.RANDOM_STATE)
    normal_df = config.DISTRIBUTION_NORMAL_DF
    samples = sum_of_squared_normals(normal_df, config.DISTRIBUTION_NORMAL_SAMPLES, rng)
    plot_squared_normals(samples, normal_df, config.SIMULATION_HIST_BINS, results_manager)

    critical_values = {str(df): critical_value(alpha, df) for df in dfs}
    if str(gof_df) not in critical_values:
        critical_values[str(gof_df)] = critical_value(alpha, gof_df)

    demo_results = {
        'alpha': alpha,
        'critical_values': critical_values,
        'squared_normals': {
            'df': normal_df,
            'n_samples': int(len(samples)),
            'sample_mean': float(samples.mean()),
            'sample_variance': float(samples.var(ddof=1)),
            'theoretical_mean': float(normal_df),
            'theoretical_variance': float(2 * normal_df),
        },
    }
    results_manager.save_json(demo_results, "result.json", test_name="distribution")

    print(f"Critical values at alpha={alpha}:")
    for df, crit in critical_values.items():
        print(f"  df = {df}: {crit:.4f}")
    print(f"Sum of {normal_df} squared normals: mean = {samples.mean():.4f} (theory {normal_df}), "
          f"variance = {samples.var(ddof=1):.4f} (theory {2 * normal_df})")
    return demo_results
