import json

import pytest

from main import main, make_parser


def test_headless_run_writes_results(tmp_path):
    exit_code = main(["run", "--ticks", "5", "--seed", "1", "--output-dir", str(tmp_path)])

    assert exit_code == 0
    metrics = json.loads((tmp_path / "metrics.json").read_text())
    assert metrics["ticks"] == 5
    assert metrics["packets_generated"] == 25
    stats = json.loads((tmp_path / "network_stats.json").read_text())
    assert len(stats["nodes"]) == 5
    assert (tmp_path / "history.csv").exists()


def test_headless_run_with_plots(tmp_path):
    assert main(["run", "--ticks", "3", "--output-dir", str(tmp_path), "--plot"]) == 0
    assert (tmp_path / "link_loads.png").exists()


_LINKS = [{"from": "P", "to": "Q", "capacity": 1}, {"from": "Q", "to": "P", "capacity": 1}]


@pytest.mark.parametrize(
    "data",
    [
        {"nodes": ["P", "Q"], "links": _LINKS[:1]},
        {"nodes": ["P", "Q"], "links": _LINKS, "routes": {"P": ["P", "Q"]}},
        {"nodes": ["P", "Q"], "links": _LINKS, "routes": {"P": {"Q": None}, "Q": {"P": ["Q", "P"]}}},
    ],
)
def test_bad_topology_exits_non_zero(tmp_path, data):
    path = tmp_path / "topology.json"
    path.write_text(json.dumps(data))

    assert main(["run", "--ticks", "1", "--topology", str(path), "--output-dir", str(tmp_path)]) == 1


def test_serve_defaults():
    args = make_parser().parse_args(["serve"])
    assert args.port is None
    assert args.command == "serve"
