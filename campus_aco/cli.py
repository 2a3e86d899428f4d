import argparse
import asyncio
import json
import os
import random
from datetime import datetime

from tqdm import tqdm

from campus_aco import params as defaults
from campus_aco.campus import (build_haversine_matrix, load_distance_matrix,
                               select_places)
from campus_aco.controller import ExecutionController
from campus_aco.errors import ACOError
from campus_aco.heuristics import nearest_neighbor, two_opt
from campus_aco.params import ACOParameters
from campus_aco.plotting import (plot_convergence, plot_pheromones,
                                 save_pheromone_snapshots)


def parse_command_line_arguments(argv=None):
  """
  Parse command line arguments to allow easy parameter tuning and experimentation.
  """
  parser = argparse.ArgumentParser(
      description='Ant Colony Optimization for walking tours across the campus')

  # Node set
  parser.add_argument('--nodes', type=str, default='',
                      help='Comma-separated place ids to visit (default: all 14)')
  parser.add_argument('--matrix', type=str, default=None,
                      help='JSON file with a precomputed distance matrix '
                           '(default: offline Haversine estimate)')

  # Algorithm parameters
  parser.add_argument('--ants', type=int, default=defaults.DEFAULT_NUM_ANTS,
                      help=f'Number of ants per iteration (default: {defaults.DEFAULT_NUM_ANTS})')
  parser.add_argument('--iterations', type=int, default=defaults.DEFAULT_NUM_ITERATIONS,
                      help=f'Number of iterations (default: {defaults.DEFAULT_NUM_ITERATIONS})')
  parser.add_argument('--alpha', type=float, default=defaults.DEFAULT_ALPHA,
                      help=f'Pheromone influence factor (default: {defaults.DEFAULT_ALPHA})')
  parser.add_argument('--beta', type=float, default=defaults.DEFAULT_BETA,
                      help=f'Distance influence factor (default: {defaults.DEFAULT_BETA})')
  parser.add_argument('--rho', type=float, default=defaults.DEFAULT_RHO,
                      help=f'Pheromone evaporation rate (default: {defaults.DEFAULT_RHO})')
  parser.add_argument('--q', type=float, default=defaults.DEFAULT_Q,
                      help=f'Pheromone deposit factor (default: {defaults.DEFAULT_Q})')
  parser.add_argument('--min-pheromone', type=float, default=defaults.DEFAULT_MIN_PHEROMONE,
                      help=f'Pheromone floor (default: {defaults.DEFAULT_MIN_PHEROMONE})')
  parser.add_argument('--initial-pheromone', type=float,
                      default=defaults.DEFAULT_INITIAL_PHEROMONE,
                      help=f'Initial pheromone level (default: {defaults.DEFAULT_INITIAL_PHEROMONE})')

  # Run options
  parser.add_argument('--local-search', action='store_true',
                      help='Refine every ant tour with 2-opt')
  parser.add_argument('--step', action='store_true',
                      help='Walk through every ant decision, pressing Enter to advance')
  parser.add_argument('--seed', type=int, default=None,
                      help='Random seed for reproducibility')
  parser.add_argument('--output-dir', type=str, default='results',
                      help='Directory for JSON results and charts (default: results)')
  parser.add_argument('--no-visualization', action='store_true',
                      help='Disable chart generation')
  parser.add_argument('--no-progress', action='store_true',
                      help='Hide the progress bar')

  return parser.parse_args(argv)


def _print_step(places, ant, probabilities):
  here = places[ant.current_node].id if places else ant.current_node
  print(f"\nAnt at {here}, tour so far: {ant.tour}")
  for info in sorted(probabilities, key=lambda p: p.probability, reverse=True):
    name = places[info.node_index].id if places else info.node_index
    print(f"  -> {name:<12} p={info.probability:.3f}  tau={info.pheromone:.4f}  "
          f"d={info.distance:.0f}m  eta={info.heuristic:.5f}")


async def _run_controller(controller, places, show_progress):
  params = controller.engine.params
  progress = tqdm(total=params.num_iterations, desc="ACO Progress",
                  disable=not show_progress)

  def on_iteration(iteration, best_length, solutions):
    progress.update(1)
    progress.set_postfix(best=f"{controller.best_solution.length:.0f}m")

  async def on_step(ant, probabilities):
    _print_step(places, ant, probabilities)
    await asyncio.to_thread(input, "Press Enter for the next move...")
    controller.advance_step()

  try:
    return await controller.run(
        on_iteration_complete=on_iteration,
        on_agent_step=on_step if controller.step_mode else None)
  finally:
    progress.close()


def run_experiment(args):
  """
  Runs ACO against the Nearest-Neighbor and 2-opt baselines on one node set
  and saves the results. Returns the summary dictionary.
  """
  places = select_places([x.strip() for x in args.nodes.split(',') if x.strip()])
  if args.matrix:
    distances = load_distance_matrix(args.matrix)
    if distances.shape[0] != len(places):
      places = None
  else:
    distances = build_haversine_matrix(places)

  params = ACOParameters(
      num_ants=args.ants,
      num_iterations=args.iterations,
      alpha=args.alpha,
      beta=args.beta,
      rho=args.rho,
      q=args.q,
      min_pheromone=args.min_pheromone,
      initial_pheromone=args.initial_pheromone,
      local_search=args.local_search,
  )
  rng = random.Random(args.seed)
  controller = ExecutionController(distances, params, rng=rng, step_mode=args.step,
                                   visual_delay=0.0, echo=args.step,
                                   track_history=not args.no_visualization)

  print(f"\n{'='*20} EXPERIMENT CONFIGURATION {'='*20}")
  print(f"Nodes: {len(distances)}")
  print(f"Parameters: {params}")
  print('=' * 60)

  best = asyncio.run(_run_controller(controller, places, not args.no_progress))
  nn = nearest_neighbor(distances, 0)
  improved = two_opt(nn.tour, distances)

  def describe(tour):
    return [places[i].id for i in tour] if places else list(tour)

  print("\n" + "=" * 20 + " FINAL RESULTS SUMMARY " + "=" * 20)
  rows = [("ACO", best), ("Nearest Neighbor", nn), ("Nearest Neighbor + 2-opt", improved)]
  for name, solution in rows:
    print(f"  {name}:")
    print(f"    Tour Length: {solution.length:.2f} m")
    print(f"    Tour Path: {describe(solution.tour)}")
  gap = (best.length / improved.length - 1) * 100 if improved.length > 0 else 0.0
  print(f"ACO vs 2-opt: {gap:+.2f}%")
  metrics = controller.metrics()
  if metrics["fallback_choices"]:
    print(f"Warning: {metrics['fallback_choices']} uniform fallback choices, "
          f"check the distance matrix")

  os.makedirs(args.output_dir, exist_ok=True)
  controller.export_results(os.path.join(args.output_dir, "aco_results.json"), places)

  summary = {
      "parameters": params.as_dict(),
      "seed": args.seed,
      "nodes": describe(range(len(distances))),
      "results": {name: {"tour": list(solution.tour), "length": solution.length}
                  for name, solution in rows},
      "best_per_iteration": controller.best_per_iteration,
  }
  summary_filename = os.path.join(
      args.output_dir, f"summary_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json")
  with open(summary_filename, 'w') as f:
    json.dump(summary, f, indent=2)
  print(f"\nExperiment summary saved to {summary_filename}")

  if not args.no_visualization:
    labels = [place.id for place in places] if places else None
    plot_convergence(controller.best_per_iteration,
                     os.path.join(args.output_dir, "convergence.png"),
                     avg_per_iteration=controller.engine.iteration_avg_lengths,
                     baselines={"Nearest Neighbor": nn.length, "2-opt": improved.length})
    plot_pheromones(controller.pheromone_snapshot(),
                    os.path.join(args.output_dir, "pheromone.png"), labels=labels)
    save_pheromone_snapshots(controller.engine.pheromone_history,
                             os.path.join(args.output_dir, "snapshots"), labels=labels)
    print(f"Visualizations saved to {args.output_dir}/")

  return summary


def main(argv=None):
  args = parse_command_line_arguments(argv)
  try:
    run_experiment(args)
  except (ACOError, ValueError, OSError) as exc:
    print(f"Error: {exc}")
    return 1
  return 0
