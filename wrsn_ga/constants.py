# wrsn_ga/constants.py
import os

# ---------------------
# SUPER CAPACITOR
# ---------------------
SC_C = 3                  # capacitance [F]
SC_V_MAX = 5.0            # [V]
SC_V_MIN = 3.5            # below this a node requests a recharge [V]
SC_V_CRITICAL = 3.3       # sensing fails at or below this voltage [V]
SC_V_INIT = 3.4           # [V]

V_SENSE = 3.3             # [V]
I_SENSE = 1.2e-3          # [A]
I_IDLE = 4e-6             # [A]
SENSE_CYCLE = 2e-3        # [s]
IDLE_CYCLE = 9.498        # [s]

WEIGHT_LOW = 3
WEIGHT_FULL = 10

MAX_FAILS = 5

# ---------------------
# ACOUSTIC TRANSFER
# ---------------------
ALPHA_MAT = 3.21          # material attenuation coefficient
EFF_ACOUS = 8.58e-3       # frequency exponent n in g = exp(-w^n * d * alpha)
ACOUS_FREQ = 1e6          # [Hz]
MAX_ACOUS_DIST = 0.7      # [m]
MIN_ACOUS_DIST = 0.1      # [m]
EFF_PIEZO = 0.9
EFF_ACOUS2DC = 0.98
ACOUS_ENERGY_SEND = 12.0  # [J]

# ---------------------
# PDV
# ---------------------
PDV_MAX_NODES = 8             # nodes serviced per trip
PDV_ENERGY_BUDGET = 200.0     # [J] per trip (flight + delivery)
PDV_FLIGHT_COST = 2.0         # [J/m]
PDV_MAX_FLIGHT_DIST = 60.0    # [m] round trip from the base station

# ---------------------
# FITNESS WEIGHTS
# ---------------------
FIT_ALPHA = 0.5
FIT_BETA = 0.3
FIT_GAMMA = 0.2

# ---------------------
# GA
# ---------------------
DEFAULT_POP_NUM = 40
DEFAULT_N_GEN = 200
DEFAULT_CROSS_RATIO = 50      # percent of the population recombined
DEFAULT_R_NUM = 4             # nearest seed points used for the initial guess
MIN_REQUESTS = 6
MAX_STAGNATION = 60
LOG_INTERVAL = 20
WORKERS = max(1, (os.cpu_count() or 2) - 1)
FIT_CACHE_MAX_ENTRIES = 50_000
FIT_CACHE_DIGEST_BYTES = 8
SEED = 42

ORIGIN = (0.0, 0.0)
