"""
Shared tooling for the thumbnail janitor: alias extraction from stored URLs,
the pict-rs delete client, and the models that describe deletions and
cleanup cycles.
"""

from .alias import alias_from_url
from .client import PictrsClient
from .deletion import DeletionStatus
from .models.cycle import CycleOutcome, ItemResult
from .models.deletion import DeletionOutcome
