import logging

#### logging ####
LOG_FORMAT = '%(levelname)s: %(message)s'
DEFAULT_LOG_LEVEL = logging.INFO

#### ant strategy ####
DEFAULT_NUM_ANTS = 20
DEFAULT_BFS_DEPTH = 4 # hops the lookahead may take through unvisited vertices
MIN_PROBABILITY_DISTANCE = 1e-12 # coincident points would otherwise divide by zero

#### random graphs ####
DEFAULT_GRAPH_SIZE = 100.0 # side length of the square points are drawn from

#### output ####
DEFAULT_OUTPUT_DIR = "visualisation_tours"
DEFAULT_DATA_DIR = "graphs"

SOLVER_NAMES = ('mst', 'ant')
