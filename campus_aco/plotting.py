import os

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.ticker import MaxNLocator


def plot_convergence(best_per_iteration, path, avg_per_iteration=None, baselines=None):
  """
  Saves the convergence chart: iteration-best and running global-best
  lengths, with optional average lengths and horizontal baseline lengths
  (e.g. {"Nearest Neighbor": 812.0}).
  """
  iterations = range(1, len(best_per_iteration) + 1)
  running_best = np.minimum.accumulate(best_per_iteration) if best_per_iteration else []

  plt.figure(figsize=(10, 6))
  plt.plot(iterations, best_per_iteration, 'b-', label='Iteration Best')
  plt.plot(iterations, running_best, 'g-', linewidth=2, label='Global Best')
  if avg_per_iteration:
    plt.plot(iterations, avg_per_iteration, 'r--', label='Average Tour Length')
  for name, length in (baselines or {}).items():
    plt.axhline(length, linestyle=':', label=f'{name} ({length:.0f})')
  plt.xlabel('Iteration')
  plt.ylabel('Tour Length (m)')
  plt.title('ACO Convergence')
  plt.legend()
  plt.grid(True)
  plt.gca().xaxis.set_major_locator(MaxNLocator(integer=True))
  plt.tight_layout()
  plt.savefig(path)
  plt.close()
  return path


def plot_pheromones(pheromones, path, labels=None, title="Final Pheromone Distribution"):
  """Heatmap of the pheromone matrix, diagonal masked."""
  n = pheromones.shape[0]
  masked_pheromones = np.ma.masked_where(np.eye(n) == 1, pheromones)

  plt.figure(figsize=(8, 6))
  plt.imshow(masked_pheromones, cmap='viridis', interpolation='nearest')
  plt.colorbar(label='Pheromone Strength')
  if labels:
    plt.xticks(range(n), labels, rotation=90)
    plt.yticks(range(n), labels)
  plt.title(title)
  plt.xlabel('Destination')
  plt.ylabel('Origin')
  plt.tight_layout()
  plt.savefig(path)
  plt.close()
  return path


def save_pheromone_snapshots(pheromone_history, output_dir, snapshots=5, labels=None):
  """Heatmaps of the pheromone matrix at a few evenly spaced iterations."""
  os.makedirs(output_dir, exist_ok=True)
  interval = max(1, len(pheromone_history) // snapshots)
  paths = []
  for i in range(0, len(pheromone_history), interval):
    paths.append(plot_pheromones(
        pheromone_history[i],
        os.path.join(output_dir, f"pheromone_iter{i + 1}.png"),
        labels=labels,
        title=f"Pheromone at Iteration {i + 1}"))
  return paths
