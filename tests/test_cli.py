import json

from campus_aco import cli


def _args(tmp_path, *extra):
  return ["--nodes", "Admin,Biblioteca,FIEC,FCNM,Coliseo",
          "--ants", "3", "--iterations", "4", "--seed", "7",
          "--output-dir", str(tmp_path), "--no-progress", *extra]


def test_defaults_follow_the_parameter_defaults():
  args = cli.parse_command_line_arguments([])
  assert args.ants == 10
  assert args.iterations == 50
  assert args.alpha == 1.0
  assert args.beta == 2.0
  assert args.rho == 0.1
  assert args.q == 100.0
  assert args.min_pheromone == 1e-6
  assert not args.step


def test_run_experiment_writes_results_and_charts(tmp_path, capsys):
  assert cli.main(_args(tmp_path)) == 0

  results = json.loads((tmp_path / "aco_results.json").read_text())
  assert len(results["distance_matrix"]) == 5
  assert len(results["best_per_iteration"]) == 4
  assert [m["id"] for m in results["markers"]] == ["Admin", "Biblioteca", "FIEC", "FCNM", "Coliseo"]

  summaries = list(tmp_path.glob("summary_*.json"))
  assert len(summaries) == 1
  summary = json.loads(summaries[0].read_text())
  assert set(summary["results"]) == {"ACO", "Nearest Neighbor", "Nearest Neighbor + 2-opt"}
  assert (summary["results"]["Nearest Neighbor + 2-opt"]["length"]
          <= summary["results"]["Nearest Neighbor"]["length"])

  assert (tmp_path / "convergence.png").exists()
  assert (tmp_path / "pheromone.png").exists()
  assert list((tmp_path / "snapshots").glob("pheromone_iter*.png"))
  assert "FINAL RESULTS SUMMARY" in capsys.readouterr().out


def test_same_seed_same_summary(tmp_path):
  first = cli.run_experiment(cli.parse_command_line_arguments(
      _args(tmp_path / "a", "--no-visualization")))
  second = cli.run_experiment(cli.parse_command_line_arguments(
      _args(tmp_path / "b", "--no-visualization")))
  assert first["results"] == second["results"]
  assert not (tmp_path / "a" / "convergence.png").exists()


def test_matrix_file_without_matching_places(tmp_path):
  matrix = tmp_path / "matrix.json"
  matrix.write_text(json.dumps([[0, 10, 15, 20], [10, 0, 35, 25],
                                [15, 35, 0, 30], [20, 25, 30, 0]]))
  summary = cli.run_experiment(cli.parse_command_line_arguments(
      ["--matrix", str(matrix), "--iterations", "10", "--ants", "5", "--seed", "1",
       "--output-dir", str(tmp_path), "--no-progress", "--no-visualization"]))
  assert summary["nodes"] == [0, 1, 2, 3]
  assert summary["results"]["Nearest Neighbor"] == {"tour": [0, 1, 3, 2], "length": 80.0}
  assert summary["results"]["ACO"]["length"] == 80.0


def test_configuration_errors_are_reported(tmp_path, capsys):
  assert cli.main(_args(tmp_path, "--rho", "2")) == 1
  assert "rho" in capsys.readouterr().out
