"""Pydantic models for profiles, progression, achievements and activity"""
