"""
Script: artifact_ci package
What: Holds Python workflow helpers for the ockam artifact image build.
Doing: Groups CLI entrypoints and shared utility code in one importable package.
Why: Keeps workflow logic readable and testable instead of inlining it in YAML run blocks.
Goal: Provide a clear, maintainable home for the artifact build and push steps.
"""
