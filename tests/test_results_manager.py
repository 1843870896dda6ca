import json
import os

import numpy as np
import pandas as pd

from chisq_lecture.results_manager import ResultsManager


def test_creates_directories_and_metadata(tmp_path):
    manager = ResultsManager(str(tmp_path), "b1", "d1")
    assert os.path.isdir(os.path.join(tmp_path, "b1", "d1"))
    with open(os.path.join(manager.run_dir, "meta.json"), encoding='utf-8') as f:
        meta = json.load(f)
    assert meta['dataset_id'] == "d1"
    assert meta['input_file_path'] == "built-in lecture datasets"


def test_save_json_handles_numpy(results_manager):
    path = results_manager.save_json(
        {'stat': np.float64(8.8), 'df': np.int64(3), 'reject': np.bool_(True), 'e': np.array([50.0, 50.0])},
        "result.json", test_name="gof")
    with open(path, encoding='utf-8') as f:
        saved = json.load(f)
    assert saved == {'stat': 8.8, 'df': 3, 'reject': True, 'e': [50.0, 50.0]}


def test_add_to_report_uses_alpha(results_manager):
    results_manager.add_to_report("A", 0.03, alpha=0.05)
    results_manager.add_to_report("B", 0.03, alpha=0.01)
    conclusions = [row['Conclusion'] for row in results_manager.results_summary]
    assert conclusions == ['Reject H0', 'Fail to Reject H0']


def test_compile_report_appends(tmp_path):
    first = ResultsManager(str(tmp_path), "batch", "first")
    first.add_to_report("Goodness-of-Fit Test", 0.03, statistic=8.8, params="df=3")
    report_path = first.compile_report()

    second = ResultsManager(str(tmp_path), "batch", "second")
    second.add_to_report("Independence Test", 0.4)
    assert second.compile_report() == report_path

    report = pd.read_csv(report_path)
    assert report['Dataset ID'].tolist() == ['first', 'second']
    assert report.columns[0] == 'Dataset ID'
    assert report.loc[0, 'Statistic'] == 8.8


def test_compile_report_without_results(results_manager, capsys):
    assert results_manager.compile_report() is None
    assert "No results" in capsys.readouterr().out
