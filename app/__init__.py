"""
Entry points: FastAPI application and AWS Lambda handler.
"""
