from pathlib import Path

from invoke import task

CONFIGS_DIR = Path(__file__).resolve().parent / "configs"


@task
def lint(c):
    c.run("ruff check src tests")


@task
def format_check(c):
    c.run("ruff format --check src tests")


@task
def test(c):
    c.run("pytest")


@task
def check_configs(c):
    for path in sorted(CONFIGS_DIR.glob("*.yaml")):
        c.run(f"tier-rating validate {path}")


@task
def ci(c):
    lint(c)
    format_check(c)
    check_configs(c)
    test(c)
