"""Generation pipeline orchestrator."""

import time
from typing import Any, Optional

from launchcraft.core.errors import GenerationError
from launchcraft.core.generation_client import CopyGenerator
from launchcraft.core.logging import StructuredLogger, get_logger
from launchcraft.core.store import ProjectStore
from launchcraft.core.validator import validate_project
from launchcraft.schemas.copy import GenerationKind, GenerationRequest, GenerationResult


class CopyPipeline:
    """Validates a raw project, generates one kind of copy and optionally stores it."""

    def __init__(
        self,
        client: CopyGenerator,
        strict_interests: bool = True,
        store: Optional[ProjectStore] = None,
    ):
        """
        Initialize pipeline.

        Args:
            client: Generation client (possibly wrapped with retries)
            strict_interests: Reject interests outside the catalog vocabulary
            store: Result store; when given, progress and results are recorded there
        """
        self.client = client
        self.strict_interests = strict_interests
        self.store = store
        self.logger: StructuredLogger = get_logger("launchcraft.pipeline")

    def run(self, project_data: Any, kind: GenerationKind | str) -> GenerationResult:
        """
        Run validation and generation for one request.

        Args:
            project_data: Raw project description (wire field names)
            kind: Generation kind or its wire value

        Returns:
            GenerationResult for the requested kind

        Raises:
            ValueError: If kind is not a known generation kind
            ProjectValidationError: If the project description is invalid
            GenerationError: If generation fails
        """
        kind = GenerationKind(kind)
        description = validate_project(project_data, strict_interests=self.strict_interests)
        request = GenerationRequest(description=description, kind=kind)

        if self.store is not None:
            self.store.set_generation_state(
                is_generating=True, current_step=kind.value, progress=0, error=None
            )

        self.logger.log_pipeline_stage("generate", "started", generation_kind=kind.value)
        start_time = time.time()
        try:
            result = self.client.generate(request)
        except GenerationError as e:
            if self.store is not None:
                self.store.set_generation_state(is_generating=False, error=e.message)
            self.logger.log_pipeline_stage(
                "generate",
                "failed",
                duration_ms=(time.time() - start_time) * 1000,
                generation_kind=kind.value,
                error_kind=e.kind,
            )
            raise
        except Exception as e:
            if self.store is not None:
                self.store.set_generation_state(is_generating=False, error=str(e))
            raise

        self.logger.log_pipeline_stage(
            "generate",
            "completed",
            duration_ms=(time.time() - start_time) * 1000,
            generation_kind=kind.value,
        )

        if self.store is not None:
            current = self.store.current_project
            if current is None or current.description != description:
                self.store.create_project(description)
            self.store.record_result(result)
            self.store.set_generation_state(is_generating=False, current_step="", progress=100)

        return result
