"""Pydantic request/response schemas"""
