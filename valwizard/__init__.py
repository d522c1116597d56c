"""valwizard: validator node onboarding wizard.

One run takes an operator from a mnemonic to a node that can join the
chain:
  - account credentials derived from the mnemonic (owner key)
  - node_config.json and the validator key store in the node home
  - autopay instructions parsed and signed (unsigned in genesis ceremonies)
  - genesis.blob from exactly one source, plus validator/fullnode yaml files
  - the block zero proof
  - account.json, the manifest an existing validator submits on-chain
"""

__version__ = "0.1.0"
__description__ = "Validator node onboarding wizard"

from valwizard.core.orchestrator import OnboardingOrchestrator
from valwizard.models.request import OnboardingRequest
from valwizard.cli.app import app as cli

__all__ = ["OnboardingOrchestrator", "OnboardingRequest", "cli", "__version__"]
