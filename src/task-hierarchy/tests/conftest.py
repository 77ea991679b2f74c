"""Pytest configuration and shared fixtures for all tests.

This module provides:
- Test configuration and markers
- Shared fixtures for the in-memory task repository and the core services
- Acting user fixtures
"""

from typing import Any

import pytest
from _pytest.config import Config

from application.services import TaskHierarchyGuard, TaskHierarchyNavigator, TaskQueryEngine, TaskTimeAggregator
from integration.repositories import InMemoryTaskRepository
from tests.fixtures.factories import DEFAULT_OWNER_ID, UserInfoFactory

# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================


def pytest_configure(config: Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, no external dependencies)")
    config.addinivalue_line("markers", "asyncio: Async tests")
    config.addinivalue_line("markers", "repository: Repository layer tests")
    config.addinivalue_line("markers", "command: Command handler tests")
    config.addinivalue_line("markers", "query: Query handler tests")
    config.addinivalue_line("markers", "hierarchy: Hierarchy integrity and traversal tests")


# ============================================================================
# REPOSITORY FIXTURES
# ============================================================================


@pytest.fixture
def task_repository() -> InMemoryTaskRepository:
    """Provide an empty in-memory task repository."""
    return InMemoryTaskRepository()


# ============================================================================
# SERVICE FIXTURES
# ============================================================================


@pytest.fixture
def navigator(task_repository: InMemoryTaskRepository) -> TaskHierarchyNavigator:
    return TaskHierarchyNavigator(task_repository, max_depth=15)


@pytest.fixture
def hierarchy_guard(task_repository: InMemoryTaskRepository, navigator: TaskHierarchyNavigator) -> TaskHierarchyGuard:
    return TaskHierarchyGuard(task_repository, navigator)


@pytest.fixture
def query_engine(task_repository: InMemoryTaskRepository) -> TaskQueryEngine:
    return TaskQueryEngine(task_repository, max_page_size=200, max_search_term_length=200)


@pytest.fixture
def aggregator(task_repository: InMemoryTaskRepository, navigator: TaskHierarchyNavigator) -> TaskTimeAggregator:
    return TaskTimeAggregator(task_repository, navigator, timeline_max_range_days=730)


# ============================================================================
# USER FIXTURES
# ============================================================================


@pytest.fixture
def owner_id() -> str:
    return DEFAULT_OWNER_ID


@pytest.fixture
def user_info(owner_id: str) -> dict[str, Any]:
    """Provide the acting user's JWT claims."""
    return UserInfoFactory.create(sub=owner_id)


@pytest.fixture
def other_user_info() -> dict[str, Any]:
    return UserInfoFactory.create(sub="owner-2")
