"""Stage 4 — Template.

Downloads an existing validator's ``account.json`` to use as the autopay
template. Only runs when ``--template-url`` was given.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from valwizard.stages.base import BaseStage

if TYPE_CHECKING:
    from valwizard.core.context import OnboardingContext


class TemplateStage(BaseStage):
    """Stage 4: fetch the template account file."""

    completion_marker: ClassVar[str] = "Template fetched"

    @property
    def stage_id(self) -> str:
        return "s4_template"

    @property
    def display_name(self) -> str:
        return "Template"

    def is_applicable(self, context: OnboardingContext) -> bool:
        return context.request.template_url is not None

    def execute(self, context: OnboardingContext) -> dict[str, Any]:
        config = context.require_config()
        path = context.collaborators.fetch_template(
            context.request.template_url,
            config.node_home,
            settings=context.settings,
        )
        context.template_path = path
        return {"template_path": str(path)}
