"""Interactive operator prompts."""

from typing import List

import click

from s3deployer.constants import DEFAULT_DEPLOY_MESSAGE


class PromptService:
    """Asks the operator for the target environment and a deploy message."""

    def __init__(self, click_module=click):
        self.click = click_module

    def choose_environment(self, names: List[str]) -> str:
        return self.click.prompt(
            f"[Deployer]: What environment are you deploying to [{','.join(names)}]?",
            type=self.click.Choice(names),
        )

    def deploy_message(self) -> str:
        value = self.click.prompt(
            "[Deployer]: What is this deploy about?",
            default=DEFAULT_DEPLOY_MESSAGE,
            show_default=False,
        )
        return value.strip() or DEFAULT_DEPLOY_MESSAGE
