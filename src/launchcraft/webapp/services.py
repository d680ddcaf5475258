"""Service layer wiring LaunchCraft collaborators for the web views."""

from launchcraft.core.accounts import AccountService, FileUserRepository
from launchcraft.core.config import Config
from launchcraft.core.generation_client import CopyGenerator
from launchcraft.core.pipeline import CopyPipeline
from launchcraft.core.provider_factory import create_generation_client
from launchcraft.core.usage import UsageTracker


class LaunchCraftService:
    """Builds the default collaborators of the views from configuration."""

    # One tracker for every request this process serves
    usage_tracker = UsageTracker()

    @staticmethod
    def get_config() -> Config:
        return Config.load()

    @staticmethod
    def create_client(config: Config) -> CopyGenerator:
        return create_generation_client(config, usage_tracker=LaunchCraftService.usage_tracker)

    @staticmethod
    def create_pipeline(config: Config, client: CopyGenerator = None) -> CopyPipeline:
        """
        Create a CopyPipeline for one request.

        Args:
            config: Loaded configuration
            client: Generation client; built from config if None

        Returns:
            CopyPipeline without a result store (the HTTP surface is stateless)
        """
        return CopyPipeline(
            client=client or LaunchCraftService.create_client(config),
            strict_interests=config.strict_interests,
        )

    @staticmethod
    def create_account_service(config: Config) -> AccountService:
        return AccountService(FileUserRepository(config.get_data_dir() / "users.json"))
