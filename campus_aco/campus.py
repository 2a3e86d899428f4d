"""
Campus node set and offline distance matrices.

The web app measures walking routes through a directions service; when a
route is missing it falls back to the great-circle distance scaled by a
detour factor. build_haversine_matrix produces that fallback matrix for
the whole node set so the solver can run without network access.
"""

import json
import math
import random
from typing import NamedTuple

import numpy as np

EARTH_RADIUS_M = 6371000
# Walking routes are longer than the straight line
PEDESTRIAN_FACTOR = 1.4


class Place(NamedTuple):
  id: str
  name: str
  lat: float
  lng: float


CAMPUS_CENTER = (-2.14668, -79.96444)

CAMPUS_PLACES = [
    Place("Admin", "Administración / Rectorado", -2.147423925708391, -79.96445212447314),
    Place("Biblioteca", "Biblioteca Central", -2.147477816522214, -79.96593456064703),
    Place("FIEC", "FIEC", -2.1446131345363892, -79.9678766570473),
    Place("FCNM", "FCNM", -2.1468411799472746, -79.96712596903747),
    Place("FADCOM", "FADCOM", -2.1440652686981694, -79.96231614220868),
    Place("Coliseo", "Coliseo ESPOL", -2.1450859240594675, -79.9643019859674),
    Place("FIMCM", "FIMCM", -2.1466902114028006, -79.96328517123769),
    Place("FCSH", "FCSH", -2.1476325410881176, -79.9686379564136),
    Place("UBEP", "UBEP", -2.142855393644157, -79.96714122010141),
    Place("STEM", "STEM (Edificio de Posgrados)", -2.143375584813157, -79.96649445324205),
    Place("FIMCP", "FIMCP", -2.144619259136839, -79.96589363500573),
    Place("FICT", "FICT", -2.1455348949876907, -79.96538692585148),
    Place("SweetCoffee", "Sweet & Coffee - ESPOL (cafetería)", -2.146134750364379, -79.9668032316627),
    Place("AlicesFood", "Alice's Food (otro punto de comida)", -2.1463377942469855, -79.96470002935152),
]


def select_places(ids=None):
  """Places in canonical order, optionally restricted to the given ids."""
  if not ids:
    return list(CAMPUS_PLACES)
  wanted = set(ids)
  unknown = wanted - {place.id for place in CAMPUS_PLACES}
  if unknown:
    raise ValueError(f"Unknown place id(s): {', '.join(sorted(unknown))}")
  return [place for place in CAMPUS_PLACES if place.id in wanted]


def haversine_distance(lat1, lng1, lat2, lng2):
  """Great-circle distance in meters."""
  d_lat = math.radians(lat2 - lat1)
  d_lng = math.radians(lng2 - lng1)
  a = (math.sin(d_lat / 2) ** 2
       + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2))
       * math.sin(d_lng / 2) ** 2)
  c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
  return EARTH_RADIUS_M * c


def build_haversine_matrix(places, factor=PEDESTRIAN_FACTOR):
  n = len(places)
  distances = np.zeros((n, n))
  for i in range(n):
    for j in range(i + 1, n):
      dist = factor * haversine_distance(places[i].lat, places[i].lng,
                                         places[j].lat, places[j].lng)
      distances[i, j] = dist
      distances[j, i] = dist
  return distances


def generate_distance_matrix(num_nodes, min_dist=3, max_dist=50, rng=random):
  """Generates a symmetric integer distance matrix for a given number of nodes."""
  if num_nodes <= 0:
    return np.array([])
  distances = np.zeros((num_nodes, num_nodes))
  for i in range(num_nodes):
    # Start from i + 1: the diagonal stays 0
    for j in range(i + 1, num_nodes):
      dist = rng.randint(min_dist, max_dist)
      distances[i, j] = dist
      distances[j, i] = dist
  return distances


def load_distance_matrix(path):
  """
  Reads a JSON distance matrix: either a plain list of rows or an exported
  results file with a "distance_matrix" key.
  """
  with open(path) as f:
    data = json.load(f)
  if isinstance(data, dict):
    data = data["distance_matrix"]
  return np.array(data, dtype=float)
