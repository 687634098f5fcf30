import pytest
from unittest.mock import Mock, patch
import requests

import climb_cli
from summit.services.hill_climber import UNREACHABLE


class TestClimbCLI:
    """Test the command-line tool against local libraries and a mocked API"""

    def test_up_by_default(self, heightmap_file, capsys):
        assert climb_cli.main([str(heightmap_file)]) == 0
        assert "The shortest path is 31 steps long" in capsys.readouterr().out

    def test_both_directions(self, heightmap_file, capsys):
        assert climb_cli.main(["--direction", "both", str(heightmap_file)]) == 0
        out = capsys.readouterr().out
        assert "The shortest path is 31 steps long" in out
        assert "The shortest hike from the lowest ground is 29 steps long" in out

    def test_branch_and_bound(self, heightmap_file, capsys):
        assert climb_cli.main(["--strategy", "branch_and_bound", "--direction", "down",
                               str(heightmap_file)]) == 0
        assert "29 steps" in capsys.readouterr().out

    def test_show_path(self, heightmap_file, capsys):
        climb_cli.main(["--show-path", str(heightmap_file)])
        out = capsys.readouterr().out
        assert "(0,0) -> " in out
        assert out.strip().endswith("(5,2)")

    def test_verbose_timing(self, heightmap_file, capsys):
        climb_cli.main(["--verbose", str(heightmap_file)])
        out = capsys.readouterr().out
        assert "Reading heightmap" in out
        assert "Completed in" in out

    def test_malformed_input(self, tmp_path, capsys):
        bad = tmp_path / "bad.txt"
        bad.write_text("S\n")
        assert climb_cli.main([str(bad)]) == 1
        assert "Invalid heightmap" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        assert climb_cli.main([str(tmp_path / "missing.txt")]) == 1

    @pytest.mark.parametrize("strategy", ["breadth_first", "branch_and_bound"])
    def test_iteration_limit(self, heightmap_file, capsys, strategy):
        assert climb_cli.main(["--strategy", strategy, "--max-iterations", "3",
                               str(heightmap_file)]) == 1
        assert "Search gave up: Search expanded more than 3 cells" in capsys.readouterr().out

    def test_iteration_limit_must_be_positive(self, heightmap_file):
        with pytest.raises(SystemExit):
            climb_cli.main(["--max-iterations", "0", str(heightmap_file)])

    def test_generous_iteration_limit(self, heightmap_file, capsys):
        assert climb_cli.main(["--max-iterations", "1000", str(heightmap_file)]) == 0
        assert "31 steps" in capsys.readouterr().out

    def test_unreachable(self, tmp_path, capsys, unreachable_heightmap):
        path = tmp_path / "cliff.txt"
        path.write_text(unreachable_heightmap)
        assert climb_cli.main([str(path)]) == 0
        assert "No up path exists" in capsys.readouterr().out

    def test_format_result(self):
        assert climb_cli.format_result("up", 31) == "The shortest path is 31 steps long"
        assert climb_cli.format_result("down", UNREACHABLE).startswith("No down path")
        assert climb_cli.format_result("down", None).startswith("No down path")

    def test_format_time(self):
        assert climb_cli.format_time(0.25) == "250ms"
        assert climb_cli.format_time(12.34) == "12.3s"
        assert climb_cli.format_time(125) == "2m 5s"


class TestClimbCLIViaAPI:
    """--api mode posts the heightmap to the service"""

    def make_response(self, status_code, payload):
        response = Mock()
        response.status_code = status_code
        response.json.return_value = payload
        if status_code >= 400:
            response.raise_for_status.side_effect = requests.exceptions.HTTPError(str(status_code))
        return response

    def test_api_success(self, heightmap_file, capsys):
        payload = {"status": "completed", "steps": 31, "path": [{"x": 0, "y": 0}, {"x": 5, "y": 2}]}
        with patch('climb_cli.requests.post', return_value=self.make_response(200, payload)) as post:
            assert climb_cli.main(["--api", "--api-url", "http://example:9001", str(heightmap_file)]) == 0

        url = post.call_args[0][0]
        assert url == "http://example:9001/api/climbs/calculate"
        assert post.call_args[1]["json"]["direction"] == "ascend"
        assert "The shortest path is 31 steps long" in capsys.readouterr().out

    def test_api_failed_climb(self, heightmap_file, capsys):
        payload = {"status": "failed", "steps": None, "path": []}
        with patch('climb_cli.requests.post', return_value=self.make_response(200, payload)):
            assert climb_cli.main(["--api", "--direction", "down", str(heightmap_file)]) == 0
        assert "No down path exists" in capsys.readouterr().out

    def test_api_rejects_heightmap(self, heightmap_file, capsys):
        with patch('climb_cli.requests.post',
                   return_value=self.make_response(422, {"detail": "No 'E' marker in heightmap"})):
            assert climb_cli.main(["--api", str(heightmap_file)]) == 1
        assert "No 'E' marker" in capsys.readouterr().out

    def test_api_unreachable_server(self, heightmap_file, capsys):
        with patch('climb_cli.requests.post', side_effect=requests.exceptions.ConnectionError()):
            assert climb_cli.main(["--api", str(heightmap_file)]) == 1
        assert "Cannot connect" in capsys.readouterr().out
