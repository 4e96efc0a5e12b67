"""Application context with dependency injection."""

from dataclasses import dataclass

from runstep.core.config import ConfigStore, FilesystemConfigStore, ToolConfig
from runstep.core.output_handler import ConsoleOutputHandler, OutputHandler
from runstep.core.run_step import RunStepRunner
from runstep.core.terraform.abc import TerraformClient
from runstep.core.terraform.real import RealTerraformClient


@dataclass(frozen=True)
class RunStepApp:
    """Immutable context holding all dependencies for run-step operations.

    Created at the CLI entry point and threaded through commands.
    Frozen to prevent accidental modification at runtime.
    """

    config: ToolConfig
    terraform_client: TerraformClient
    output_handler: OutputHandler

    def runner(self) -> RunStepRunner:
        return RunStepRunner(
            terraform_client=self.terraform_client,
            config=self.config,
            output_handler=self.output_handler,
        )


def create_app(config_store: ConfigStore | None = None) -> RunStepApp:
    """Create production context with real implementations.

    Raises:
        ValueError: If the config file exists but is malformed
    """
    store = config_store if config_store is not None else FilesystemConfigStore()
    config = store.load()
    return RunStepApp(
        config=config,
        terraform_client=RealTerraformClient(config.bin_dir),
        output_handler=ConsoleOutputHandler(),
    )
