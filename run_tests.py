#!/usr/bin/env python3
"""
Test runner script for DocuMind.

Wraps the pytest, coverage and lint invocations used during development.
"""
import subprocess
import sys
import os
from pathlib import Path

SOURCE_DIRS = ["backend/", "agents/", "mcp_server/", "storage/", "shared/"]


def run_command(cmd, description):
    """Run a command and report whether it succeeded."""
    print(f"\n{'='*60}")
    print(f"Running: {description}")
    print(f"Command: {' '.join(cmd)}")
    print(f"{'='*60}")

    result = subprocess.run(cmd, capture_output=False)
    if result.returncode != 0:
        print(f"\n{description} failed with return code {result.returncode}")
        return False
    print(f"\n{description} completed successfully")
    return True


def main():
    if len(sys.argv) < 2:
        print("Usage: python run_tests.py <command>")
        print("\nAvailable commands:")
        print("  unit          - Run unit tests")
        print("  coverage      - Run unit tests with coverage report")
        print("  lint          - Run flake8 and isort checks")
        print("  type-check    - Run type checking with mypy")
        print("  clean         - Clean up test artifacts")
        sys.exit(1)

    command = sys.argv[1].lower()
    os.chdir(Path(__file__).parent)

    if command == "unit":
        success = run_command(["python", "-m", "pytest", "test/unit/", "-v"], "Unit Tests")

    elif command == "coverage":
        cov_args = [f"--cov={d.rstrip('/')}" for d in SOURCE_DIRS]
        success = run_command(
            ["python", "-m", "pytest", "test/", *cov_args, "--cov-report=html", "--cov-report=term-missing", "-v"],
            "Unit Tests with Coverage"
        )
        if success:
            print("\nCoverage report generated in htmlcov/index.html")

    elif command == "lint":
        success = run_command(["python", "-m", "flake8", *SOURCE_DIRS, "test/"], "Flake8 Linting")
        success &= run_command(
            ["python", "-m", "isort", "--check-only", *SOURCE_DIRS, "test/"], "Import Sorting Check"
        )

    elif command == "type-check":
        success = run_command(["python", "-m", "mypy", *SOURCE_DIRS], "Type Checking with MyPy")

    elif command == "clean":
        import shutil

        for artifact in ["htmlcov/", ".pytest_cache/", ".coverage"]:
            if os.path.isdir(artifact):
                shutil.rmtree(artifact)
                print(f"Removed directory: {artifact}")
            elif os.path.exists(artifact):
                os.remove(artifact)
                print(f"Removed file: {artifact}")
        success = True

    else:
        print(f"Unknown command: {command}")
        success = False

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
