"""Unit tests for eonac.cli.run_solve and eonac.cli.main_parser modules."""

import json
from pathlib import Path

import pytest

from eonac.cli.constants import ERROR_EXIT_CODE, SUCCESS_EXIT_CODE
from eonac.cli.main_parser import build_main_argument_parser
from eonac.cli.run_solve import main, resolve_solver_config


class TestMainParser:
    """Tests for build_main_argument_parser."""

    def test_reference_and_overrides_are_parsed(self) -> None:
        """Test solver flags map onto config field names."""
        arguments = build_main_argument_parser().parse_args(
            [
                "--reference",
                "b140",
                "--strategy",
                "greedy",
                "--time-limit",
                "2",
                "--max-steps",
                "100",
                "--log-level",
                "debug",
            ]
        )

        assert arguments.reference == "b140"
        assert arguments.strategy == "greedy"
        assert arguments.time_limit_s == 2.0
        assert arguments.max_steps == 100
        assert arguments.log_level == "DEBUG"
        assert arguments.workers is None

    def test_input_is_required(self) -> None:
        """Test one of --instance / --reference must be given."""
        with pytest.raises(SystemExit):
            build_main_argument_parser().parse_args([])

    def test_instance_and_reference_are_exclusive(self) -> None:
        """Test both inputs cannot be combined."""
        with pytest.raises(SystemExit):
            build_main_argument_parser().parse_args(
                ["--instance", "x.yaml", "--reference", "b140"]
            )

    def test_config_file_is_merged_under_flags(self, tmp_path: Path) -> None:
        """Test command line values override the config file."""
        config_fp = tmp_path / "solver.ini"
        config_fp.write_text(
            "[solver_settings]\nstrategy = greedy\nworkers = 2\n", encoding="utf-8"
        )
        arguments = build_main_argument_parser().parse_args(
            ["--reference", "b140", "--config", str(config_fp), "--workers", "4"]
        )

        config = resolve_solver_config(arguments)

        assert config.strategy == "greedy"
        assert config.workers == 4


class TestRunSolveMain:
    """Tests for the eonac-solve entry point."""

    @pytest.mark.parametrize("reference", ["b140", "b360"])
    def test_reference_solve_prints_total(
        self, reference: str, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test a reference solve succeeds and accepts every request."""
        exit_code = main(["--reference", reference, "--log-level", "WARNING"])

        output = capsys.readouterr().out
        assert exit_code == SUCCESS_EXIT_CODE
        assert "Total_Accepted = 5/5 (optimal)" in output

    def test_output_writes_json_report(self, tmp_path: Path) -> None:
        """Test --output dumps the report."""
        output_fp = tmp_path / "out" / "report.json"

        exit_code = main(
            [
                "--reference",
                "b140",
                "--strategy",
                "greedy",
                "--output",
                str(output_fp),
                "--log-level",
                "WARNING",
            ]
        )

        report = json.loads(output_fp.read_text(encoding="utf-8"))
        assert exit_code == SUCCESS_EXIT_CODE
        assert report["Total_Accepted"] == 5
        assert report["strategy"] == "first_fit_decreasing"
        assert len(report["requests"]) == 5

    def test_missing_instance_returns_error_code(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test a missing instance file fails cleanly."""
        exit_code = main(["--instance", str(tmp_path / "absent.yaml")])

        assert exit_code == ERROR_EXIT_CODE
        assert "not found" in capsys.readouterr().out

    def test_invalid_instance_returns_error_code(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test invalid problem data is reported, not raised."""
        instance_fp = tmp_path / "bad.json"
        instance_fp.write_text(
            json.dumps(
                {
                    "slot_ceiling": 0,
                    "topology": {"links": [[1, 2]]},
                    "request_types": {"m1": 1},
                    "zones": [{"id": "z1", "accepted_type": "m1", "capacity": 1}],
                    "requests": [],
                }
            ),
            encoding="utf-8",
        )

        exit_code = main(["--instance", str(instance_fp)])

        assert exit_code == ERROR_EXIT_CODE
        assert "slot_ceiling must be positive" in capsys.readouterr().out

    def test_unknown_strategy_from_config_returns_error_code(
        self, tmp_path: Path
    ) -> None:
        """Test an unknown strategy in a config file is reported."""
        config_fp = tmp_path / "solver.yaml"
        config_fp.write_text("solver_settings: {strategy: annealing}\n", encoding="utf-8")

        exit_code = main(["--reference", "b140", "--config", str(config_fp)])

        assert exit_code == ERROR_EXIT_CODE

    @pytest.fixture
    def strict_instance(self, tmp_path: Path) -> Path:
        """Provide an instance declaring the error policy and a missing link."""
        instance_fp = tmp_path / "strict.json"
        instance_fp.write_text(
            json.dumps(
                {
                    "slot_ceiling": 8,
                    "unknown_link_policy": "error",
                    "topology": {"nodes": [1, 2, 3], "links": [[1, 2]]},
                    "request_types": {"m1": 2},
                    "zones": [{"id": "z1", "accepted_type": "m1", "capacity": 8}],
                    "requests": [
                        {"id": "r1", "type": "m1", "paths": [[1, 2]], "starts": [1]},
                        {"id": "r2", "type": "m1", "paths": [[2, 3]], "starts": [1]},
                    ],
                }
            ),
            encoding="utf-8",
        )
        return instance_fp

    def test_instance_unknown_link_policy_is_honoured(
        self, strict_instance: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test the policy declared by the instance file applies without a flag."""
        exit_code = main(["--instance", str(strict_instance), "--log-level", "WARNING"])

        assert exit_code == ERROR_EXIT_CODE
        assert "absent from the topology" in capsys.readouterr().out

    def test_unknown_link_policy_flag_overrides_instance(
        self, strict_instance: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test --unknown-link-policy wins over the instance file."""
        exit_code = main(
            [
                "--instance",
                str(strict_instance),
                "--unknown-link-policy",
                "reject",
                "--log-level",
                "WARNING",
            ]
        )

        output = capsys.readouterr().out
        assert exit_code == SUCCESS_EXIT_CODE
        assert "Total_Accepted = 1/2" in output
