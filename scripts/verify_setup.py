"""Verify that the setup is correct before running the metric hunter."""
import os
import shutil
import sys
from dataclasses import astuple
from pathlib import Path
from metrichunter.config import load_settings
from metrichunter.infrastructure.sourcemonitor.job_descriptor import (
    DEFAULT_TEMPLATE_PATH,
    TemplateReplacements
)


settings = load_settings()


def check_environment_variables():
    """Check required environment variables."""
    print("Checking environment variables...")

    required_vars = ["GITHUB_TOKEN"]
    optional_vars = ["WORK_DIR", "SOURCEMONITOR_EXE", "HUNT_LANGUAGE", "HUNT_TOPIC", "HUNT_COUNT", "OUTPUT_CSV"]

    missing = [var for var in required_vars if not os.getenv(var)]
    if missing:
        print(f"❌ Missing required environment variables: {', '.join(missing)}")
        return False

    print("✅ Required environment variables set")

    for var in optional_vars:
        if os.getenv(var):
            print(f"   {var}: {os.getenv(var)}")

    return True


def check_git():
    """Check that git is on the PATH."""
    print("\nChecking git...")

    git = shutil.which("git")
    if git:
        print(f"✅ git found at {git}")
        return True
    print("❌ git not found on PATH")
    return False


def check_sourcemonitor():
    """Check that the SourceMonitor executable exists."""
    print("\nChecking SourceMonitor...")

    exe = settings.sourcemonitor_exe
    if os.path.isfile(exe) or shutil.which(exe):
        print(f"✅ SourceMonitor found: {exe}")
        return True
    print(f"❌ SourceMonitor executable not found: {exe}")
    return False


def check_template():
    """Check that the command file template contains every placeholder."""
    print("\nChecking SourceMonitor template...")

    template_path = Path(settings.sourcemonitor_template or DEFAULT_TEMPLATE_PATH)
    if not template_path.is_file():
        print(f"❌ Template not found: {template_path}")
        return False

    template = template_path.read_text(encoding="utf-8")
    missing = [token for token in astuple(TemplateReplacements()) if token not in template]
    if missing:
        print(f"⚠️  Template does not use: {', '.join(missing)}")
    else:
        print(f"✅ Template looks valid: {template_path}")
    return True


def check_github_token():
    """Verify GitHub token format."""
    print("\nChecking GitHub token...")

    token = settings.github_token
    if not token:
        print("❌ GITHUB_TOKEN not set")
        return False

    # Simple check - token format
    if token.startswith("ghp_") or token.startswith("github_pat_"):
        print("✅ GitHub token format looks valid")
        print(f"   Token prefix: {token[:10]}...")
        return True
    else:
        print("⚠️  Token format may be invalid (expected ghp_* or github_pat_*)")
        return True  # Don't fail, might be old format


def main():
    """Run all verification checks."""
    print("=" * 60)
    print("Metric Hunter - Setup Verification")
    print("=" * 60)

    checks = [
        ("Environment Variables", check_environment_variables),
        ("Git", check_git),
        ("SourceMonitor", check_sourcemonitor),
        ("SourceMonitor Template", check_template),
        ("GitHub Token", check_github_token),
    ]

    results = {}
    for name, check_func in checks:
        try:
            results[name] = check_func()
        except Exception as e:
            print(f"❌ {name} check failed with exception: {e}")
            results[name] = False

    print("\n" + "=" * 60)
    print("Verification Summary")
    print("=" * 60)

    for name, passed in results.items():
        status = "✅ PASS" if passed else "❌ FAIL"
        print(f"{status}: {name}")

    if all(results.values()):
        print("\n✅ All checks passed! Ready to hunt.")
        print("\nNext steps:")
        print("  python hunt_metrics.py")
        sys.exit(0)
    else:
        print("\n❌ Some checks failed. Please fix the issues above.")
        print("\nCommon solutions:")
        print("  - Set GITHUB_TOKEN: export GITHUB_TOKEN=your_token")
        print("  - Point SOURCEMONITOR_EXE at SourceMonitor.exe")
        print("  - Install git and make sure it is on PATH")
        sys.exit(1)


if __name__ == "__main__":
    main()
