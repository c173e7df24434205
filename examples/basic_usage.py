#!/usr/bin/env python3
"""
Basic codecommit-lifecycle usage example.

Drives create, open, clone and delete jobs through the scheduler against
the in-memory mock client, so no network access or git binary is needed.
Run with: python examples/basic_usage.py
"""

import logging
import tempfile
from pathlib import Path

from codecommit_lifecycle import (
    ConfirmationGate,
    JobScheduler,
    JobState,
    LifecycleConfig,
    LoggingEventTracker,
    RefreshRegistry,
    RepositoryLifecycleService,
    ValidationError,
    available_operations,
    configure_logging,
)
from codecommit_lifecycle.testing import MockCodeCommitClient, MockGitCloner

configure_logging(level=logging.INFO, jobs_level=logging.DEBUG)

print("=== codecommit-lifecycle Basic Usage Example ===\n")

# 1. Menu rules
print("1. Operations offered per selection...")
print(f"   Root selected: {[op.value for op in available_operations(True, [])]}")
print(f"   One repository: {[op.value for op in available_operations(False, ['demo'])]}")
print(f"   Two repositories: {available_operations(False, ['a', 'b'])}")

# 2. Confirmation gate
print("\n2. Confirmation gate...")
for typed in ("demo", "Demo", "demo ", ""):
    print(f"   typed={typed!r}: {ConfirmationGate.validate('demo', typed)}")

# 3. Lifecycle jobs
print("\n3. Running lifecycle jobs...")
registry = RefreshRegistry()
registry.register(lambda: print("   (repository list refreshed)"))

mock = MockCodeCommitClient()
config = LifecycleConfig(region="eu-west-1", account_id="123456789012")

with JobScheduler(refresh_notifier=registry, event_tracker=LoggingEventTracker()) as scheduler:
    service = RepositoryLifecycleService(mock.repos, scheduler, config, cloner=MockGitCloner())

    created = scheduler.wait(service.create_repository("demo", "example repository"), timeout=5)
    print(f"   create: {created.state.value} -> {created.result.clone_url_http}")

    opened = scheduler.wait(service.open_repository("demo"), timeout=5)
    print(f"   open: {opened.state.value} -> {opened.result.console_url}")

    with tempfile.TemporaryDirectory() as workdir:
        cloned = scheduler.wait(
            service.clone_repository("demo", Path(workdir) / "demo"), timeout=5
        )
        print(f"   clone: {cloned.state.value} -> {cloned.result}")

    try:
        service.delete_repository("demo", confirmation="Demo")
    except ValidationError as e:
        print(f"   delete refused: {e}")

    deleted = scheduler.wait(service.delete_repository("demo", confirmation="demo"), timeout=5)
    assert deleted.state is JobState.SUCCEEDED
    print(f"   delete: {deleted.state.value}")

print(f"\n   Remote calls: {[call.method for call in mock.get_calls()]}")
print("\n=== Done ===")
