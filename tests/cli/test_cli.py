import json
import pytest
import yaml
from pycachesim.cli.main import main, build_parser


def test_run_prints_summary(traces_dir, capsys):
    assert main(["run", "-s", "4", "-E", "1", "-b", "4", "-t", str(traces_dir / "yi.trace")]) == 0
    out = capsys.readouterr().out
    assert out.strip() == "hits:4 misses:5 evictions:3"


def test_run_verbose(traces_dir, capsys):
    main(["run", "-v", "-s", "4", "-E", "1", "-b", "4", "-t", str(traces_dir / "yi.trace")])
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "L 10,1 miss"
    assert lines[1] == "M 20,1 miss hit"
    assert lines[-2] == "M 12,1 miss eviction hit"
    assert lines[-1] == "hits:4 misses:5 evictions:3"


def test_run_from_config_file(traces_dir, tmp_path, capsys):
    config_file = tmp_path / "run.yaml"
    config_file.write_text(yaml.dump({
        "set_index_bits": 0,
        "lines_per_set": 2,
        "block_offset_bits": 0,
        "trace_file": str(traces_dir / "lru.trace"),
    }))
    main(["run", "-c", str(config_file)])
    assert capsys.readouterr().out.strip() == "hits:2 misses:3 evictions:1"


def test_run_with_report(traces_dir, tmp_path, capsys):
    report_dir = tmp_path / "report"
    main(["run", "-s", "4", "-E", "1", "-b", "4", "-t", str(traces_dir / "yi.trace"),
          "--report", str(report_dir)])
    report = json.loads((report_dir / "report.json").read_text())
    assert report["hits"] == 4
    assert (report_dir / "report.html").exists()
    assert capsys.readouterr().out.strip().endswith("hits:4 misses:5 evictions:3")


def test_run_invalid_geometry_exits(traces_dir, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["run", "-s", "40", "-E", "1", "-b", "30", "-t", str(traces_dir / "yi.trace")])
    assert excinfo.value.code == 2
    assert "exceed" in capsys.readouterr().err


def test_run_zero_lines_exits(traces_dir, capsys):
    with pytest.raises(SystemExit):
        main(["run", "-s", "1", "-E", "0", "-b", "1", "-t", str(traces_dir / "yi.trace")])
    assert "Lines per set" in capsys.readouterr().err


def test_run_missing_trace_exits(tmp_path, capsys):
    with pytest.raises(SystemExit):
        main(["run", "-s", "1", "-E", "1", "-b", "1", "-t", str(tmp_path / "missing.trace")])
    assert "trace file not found" in capsys.readouterr().err


def test_run_without_trace_exits(capsys):
    with pytest.raises(SystemExit):
        main(["run", "-s", "1", "-E", "1", "-b", "1"])
    assert "a trace file is required" in capsys.readouterr().err


def test_unknown_policy_rejected_by_parser():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["run", "--policy", "fifo"])


def test_decode(capsys):
    main(["decode", "-s", "3", "-b", "6", "0x1f6a", "10"])
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "0x1f6a: tag=0xf set=5 offset=42",
        "0x10: tag=0x0 set=0 offset=16",
    ]


def test_decode_invalid_address():
    with pytest.raises(SystemExit):
        main(["decode", "xyz"])


def test_run_yaml_syntax_error_exits(traces_dir, tmp_path, capsys):
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("a: [1\n")
    with pytest.raises(SystemExit) as excinfo:
        main(["run", "-c", str(config_file), "-t", str(traces_dir / "yi.trace")])
    assert excinfo.value.code == 2
    assert "not valid YAML" in capsys.readouterr().err


def test_run_yaml_property_key_is_ignored(traces_dir, tmp_path, capsys):
    config_file = tmp_path / "run.yaml"
    config_file.write_text(yaml.dump({"geometry": 1, "set_index_bits": 4, "block_offset_bits": 4}))
    main(["run", "-c", str(config_file), "-t", str(traces_dir / "yi.trace")])
    assert capsys.readouterr().out.strip() == "hits:4 misses:5 evictions:3"


@pytest.mark.parametrize("address", ["10000000000000000", "1_0", "+10"])
def test_decode_rejects_addresses_the_trace_parser_rejects(address, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["decode", "-s", "0", "-b", "0", address])
    assert excinfo.value.code == 2
    err = capsys.readouterr().err
    assert "Invalid hex address" in err or "does not fit" in err


def test_decode_accepts_largest_address(capsys):
    main(["decode", "-s", "0", "-b", "0", "ffffffffffffffff"])
    assert capsys.readouterr().out.strip() == "0xffffffffffffffff: tag=0xffffffffffffffff set=0 offset=0"
