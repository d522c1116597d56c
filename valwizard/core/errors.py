"""Error taxonomy for the onboarding wizard.

Three families, all fatal to the pipeline:

- ``InputError``: operator input is missing or malformed. The message is
  written for the operator and says what to supply.
- ``CollaboratorError``: a collaborator (key store, miner, node files,
  signer, manifest writer) could not complete its work.
- ``NetworkError``: an upstream fetch failed. Connection failures are kept
  apart from bad responses so the operator can tell them from disk errors.
"""

from __future__ import annotations


class WizardError(RuntimeError):
    """Base class for every error raised by the wizard."""


# ---------------------------------------------------------------------------
# Input errors
# ---------------------------------------------------------------------------


class InputError(WizardError):
    """Operator-supplied input is missing or malformed."""


class CredentialError(InputError):
    """The mnemonic could not be turned into credentials."""


class MissingUpstreamError(InputError):
    """No upstream peer or template URL was supplied outside ceremony mode."""


class AutopayParseError(InputError):
    """The autopay instruction file is missing, unreadable or malformed."""


class GenesisSourceError(InputError):
    """The genesis sourcing options are contradictory or incomplete."""


class WaypointError(InputError, ValueError):
    """A waypoint string is not of the form ``<version>:<hash>``."""


# ---------------------------------------------------------------------------
# Collaborator errors
# ---------------------------------------------------------------------------


class CollaboratorError(WizardError):
    """A pipeline collaborator failed."""


class KeyStoreError(CollaboratorError):
    """The validator key store could not be written."""


class NodeFilesError(CollaboratorError):
    """Node network configuration files could not be written."""


class MiningError(CollaboratorError):
    """Block zero could not be mined or parsed."""


class TxParamsError(CollaboratorError):
    """Transaction submission parameters could not be resolved."""


class SigningError(CollaboratorError):
    """A transaction script could not be signed."""


class ManifestError(CollaboratorError):
    """The account manifest could not be assembled or written."""


class MissingProofError(ManifestError):
    """The block zero proof is required but absent."""


# ---------------------------------------------------------------------------
# Network errors
# ---------------------------------------------------------------------------


class NetworkError(WizardError):
    """An upstream network fetch failed."""


class UpstreamConnectionError(NetworkError):
    """The upstream node could not be reached."""


class UpstreamResponseError(NetworkError):
    """The upstream node answered with an error or an unusable body."""
