# Role: Central enum of intent labels the bot acts on. Anything the NLU service returns outside this set
# is treated as "not understood" by the main flow.

from enum import Enum


class Intent(str, Enum):
    PLACE_ORDER = "PlaceOrder"
    NONE = "None"
