import os
from enum import Enum

# Logging Configuration
LOG_LEVEL = os.getenv("CULTIVO_LOG_LEVEL", "INFO").upper()

class Intent(str, Enum):
    CONFIRMING = "Confirming"
    DENYING = "Denying"
    QUERYING = "Querying"
    NARRATING = "Narrating"

# Default Paths
ENV_MODE = os.getenv("ENV", "PROD").upper()

if ENV_MODE == "DEV":
    DEFAULT_DATA_PATH = os.getenv("CULTIVO_DATA_PATH", "./data_dev")
else:
    DEFAULT_DATA_PATH = os.getenv("CULTIVO_DATA_PATH", "./data")

DEFAULT_KB_FILENAME = "kb.json"
DEFAULT_GRAPH_EXPORT_FILENAME = "kb.gexf"

# Models
EMBEDDING_MODEL = os.getenv("CULTIVO_EMBEDDING_MODEL", "paraphrase-multilingual-MiniLM-L12-v2")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash-lite")
USE_LLM_EXTRACTION = os.getenv("CULTIVO_LLM_EXTRACTION", "false").lower() == "true"

# Truth values
EVIDENTIAL_HORIZON = 1.0
MAX_CONFIDENCE = 0.9999

# Energy
INITIAL_ENERGY = 0.8
REINFORCE_BOOST = 0.3
ACTIVE_THRESHOLD = 0.5
DORMANT_THRESHOLD = 0.2

# Thresholds
REINFORCE_SIMILARITY = float(os.getenv("CULTIVO_REINFORCE_SIMILARITY", "0.80"))
SIMILARITY_LINK_FLOOR = float(os.getenv("CULTIVO_SIMILARITY_LINK_FLOOR", "0.70"))
SIMILARITY_LINK_CONFIDENCE = 0.6
QUERY_SIMILARITY = float(os.getenv("CULTIVO_QUERY_SIMILARITY", "0.5"))
INTENT_TEMPLATE_THRESHOLD = float(os.getenv("CULTIVO_INTENT_THRESHOLD", "0.65"))
INFERENCE_ENERGY_THRESHOLD = float(os.getenv("CULTIVO_INFERENCE_ENERGY", "0.3"))
MIN_INFERRED_CONFIDENCE = 0.05

# Question candidates
QUESTION_MIN_ENERGY = 0.4
QUESTION_MAX_CONFIDENCE = 0.5

# Turn cycle
MAX_INFERENCES_PER_TURN = int(os.getenv("CULTIVO_MAX_INFERENCES", "5"))
QUESTION_INTERVAL = int(os.getenv("CULTIVO_QUESTION_INTERVAL", "2"))
DECAY_INTERVAL = int(os.getenv("CULTIVO_DECAY_INTERVAL", "10"))
DECAY_FACTOR = float(os.getenv("CULTIVO_DECAY_FACTOR", "0.95"))
QUERY_TOP_K = 5
QUERY_LINKS_PER_CONCEPT = 3
