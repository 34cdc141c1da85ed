"""Request dependencies."""

from fastapi import Request

from src.experimentation.ab_testing import ABTestingSystem


def get_ab_testing_system(request: Request) -> ABTestingSystem:
    """Get the application's experiment registry."""
    return request.app.state.ab_testing
