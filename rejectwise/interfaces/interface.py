"""
Main interface for rejectwise users.
"""
import logging
from pathlib import Path
from typing import Optional, Tuple
from langchain_core.language_models.chat_models import BaseChatModel

from ..errors import ExtractionError, PersistenceError, SubmissionInProgressError
from ..extraction.extractor import (
    DEFAULT_API_URL,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    ChatModelExtractor,
    MessagesApiExtractor,
    RejectionExtractor,
)
from ..insights import state as reducers
from ..insights.state import SessionState, Tab
from ..storage.json_store import JsonStorageManager
from ..storage.models import InsightSnapshot, RejectionRecord, UserProfile
from ..utils.config import Config

logger = logging.getLogger(__name__)

class RejectWise:
    """Session controller: owns the state and persists it after every change."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        storage_path: Optional[str] = None,
        llm: Optional[BaseChatModel] = None,
        model_name: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        api_url: str = DEFAULT_API_URL,
        timeout: Optional[float] = None,
        extractor: Optional[RejectionExtractor] = None
    ):
        """Initialize the controller and load any stored session.

        Args:
            api_key: API key for the messages API (ignored when llm is given)
            storage_path: Optional path to store data. If None, uses package's data/active directory
            llm: Optional pre-configured langchain chat model
            model_name: Model name to use if llm not provided
            max_tokens: Token budget for each extraction reply
            api_url: Messages endpoint to use if llm not provided
            timeout: Optional number of seconds to wait for an extraction
            extractor: Optional ready-made extractor, overrides all of the above
        """
        if extractor is None:
            if llm is not None:
                extractor = ChatModelExtractor(llm, timeout=timeout)
            else:
                extractor = MessagesApiExtractor(
                    api_key=api_key,
                    model_name=model_name,
                    max_tokens=max_tokens,
                    api_url=api_url,
                    timeout=timeout
                )
        self._extractor = extractor

        # Use package's data directory by default
        if storage_path is None:
            storage_path = str(Path(__file__).parent.parent.parent / "data" / "active")

        self._storage = JsonStorageManager(storage_path)
        self._state = reducers.initial_state(self._storage.load_data())
        logger.info("Loaded %d rejections", len(self._state.rejections))

    @classmethod
    def from_config(cls, config: Optional[Config] = None, llm: Optional[BaseChatModel] = None) -> "RejectWise":
        """Build a controller from environment configuration."""
        config = config or Config()
        return cls(
            api_key=config.get_credentials("anthropic")["api_key"],
            storage_path=config.get("storage_dir"),
            llm=llm,
            model_name=config.get("model"),
            max_tokens=config.get_int("max_tokens"),
            api_url=config.get("api_url"),
            timeout=config.get_float("timeout")
        )

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def rejections(self) -> Tuple[RejectionRecord, ...]:
        return self._state.rejections

    @property
    def insights(self) -> InsightSnapshot:
        return self._state.insights

    @property
    def profile(self) -> UserProfile:
        return self._state.profile

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    def _persist(self):
        try:
            self._storage.save_data(reducers.to_data(self._state))
        except PersistenceError as e:
            logger.error("Could not save session data: %s", e)

    async def submit_feedback(self, text: str) -> Optional[RejectionRecord]:
        """Extract a rejection from feedback text and add it to the history.

        Args:
            text: Feedback text pasted by the user

        Returns:
            The new RejectionRecord, or None if extraction failed. On
            failure the message is available as ``error`` and the text is
            kept as the draft.

        Raises:
            ValueError: If the text is empty
            SubmissionInProgressError: If another submission is still running
        """
        if not text or not text.strip():
            raise ValueError("Feedback text must not be empty")
        if self._state.submitting:
            raise SubmissionInProgressError("A feedback submission is already in progress")

        self._state = reducers.submission_started(self._state, text)
        try:
            record = await self._extractor.extract(text)
        except ExtractionError as e:
            logger.warning("Extraction failed: %s", e.message)
            self._state = reducers.extraction_failed(self._state, e.message)
            return None
        except BaseException:
            self._state = reducers.extraction_failed(self._state, "The submission was interrupted.")
            raise

        self._state = reducers.record_added(self._state, record)
        self._persist()
        return record

    def start_remediation(self, area: str) -> UserProfile:
        """Start working on a skill gap.

        Raises:
            SkillGapNotFoundError: If the profile has no gap for ``area``
        """
        new_state = reducers.remediation_started(self._state, area)
        if new_state is not self._state:
            self._state = new_state
            self._persist()
        return self._state.profile

    def update_profile(self, name: str, target_role: str) -> UserProfile:
        """Set the user's name and target role."""
        self._state = reducers.profile_updated(self._state, name, target_role)
        self._persist()
        return self._state.profile

    def select_tab(self, tab: Tab):
        self._state = reducers.tab_selected(self._state, tab)

    def dismiss_error(self):
        self._state = reducers.error_dismissed(self._state)
