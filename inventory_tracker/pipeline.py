import logging
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)


class DataPipeline(ABC):
    """
    Abstract base class for ledger pipelines (bulk import, report export).
    Follows an Extract -> Transform -> Load (ETL) pattern.
    """

    def __init__(self, pipeline_name: str):
        self.pipeline_name = pipeline_name

    def run(self, source: Any = None) -> Any:
        """
        Orchestrates the pipeline execution and returns whatever load() produces.
        """
        logger.info(f"🚀 STEP: {self.pipeline_name.upper()}")
        logger.info("-" * 30)

        # --- 1. EXTRACT ---
        raw_data = self.extract(source)
        return self.finish(raw_data)

    def finish(self, raw_data: Any | None) -> Any:
        """Runs transform and load on already-extracted data, without yielding."""
        if raw_data is None:
            logger.warning(f"⚠️ Nothing extracted for {self.pipeline_name}.")
            return self.on_extract_failure()

        # --- 2. TRANSFORM ---
        transformed = self.transform(raw_data)

        # --- 3. LOAD ---
        result = self.load(transformed)

        logger.info(f"✅ {self.pipeline_name.capitalize()} pipeline finished.")
        logger.info("=" * 60)
        return result

    @abstractmethod
    def extract(self, source: Any) -> Any | None:
        """
        Reads the pipeline's input. Returns None when the input is unusable.
        """
        pass

    @abstractmethod
    def transform(self, raw_data: Any) -> Any:
        pass

    @abstractmethod
    def load(self, transformed: Any) -> Any:
        pass

    def on_extract_failure(self) -> Any:
        """The result run() returns when extract() produced nothing."""
        return None
