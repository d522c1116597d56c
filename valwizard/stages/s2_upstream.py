"""Stage 2 — Upstream peer.

Outside ceremony mode the wizard needs a node to query. The explicit
``--upstream-peer`` wins; otherwise the template URL doubles as the peer.
Either way the port is normalized to the node's query port.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from valwizard.bridge.upstream import with_port
from valwizard.config import WizardSettings
from valwizard.core.errors import MissingUpstreamError
from valwizard.models.request import OnboardingRequest
from valwizard.stages.base import BaseStage

if TYPE_CHECKING:
    from valwizard.core.context import OnboardingContext


def resolve_upstream_peer(request: OnboardingRequest, settings: WizardSettings) -> str:
    url = request.upstream_peer or request.template_url
    if url is None:
        raise MissingUpstreamError(
            "Must set a URL to query the chain. Use --upstream-peer or --template-url."
        )
    return with_port(url, settings.query_port)


class UpstreamStage(BaseStage):
    """Stage 2: resolve the upstream peer (skipped in ceremony mode)."""

    completion_marker: ClassVar[str] = "Upstream peer resolved"

    @property
    def stage_id(self) -> str:
        return "s2_upstream"

    @property
    def display_name(self) -> str:
        return "Upstream Peer"

    def is_applicable(self, context: OnboardingContext) -> bool:
        return not context.request.genesis_ceremony

    def execute(self, context: OnboardingContext) -> dict[str, Any]:
        peer = resolve_upstream_peer(context.request, context.settings)
        context.upstream_peer = peer
        return {"upstream_peer": peer}
