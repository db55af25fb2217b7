"""AWS Lambda entry point: ``secretrotator.lambda_function.lambda_handler``."""

from .handler import create_handler

lambda_handler = create_handler()
