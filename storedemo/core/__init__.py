"""
Core object model for the upload service.

This module is framework-agnostic - it doesn't import FastAPI, boto3,
or any infrastructure concerns.
"""
