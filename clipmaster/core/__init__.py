"""Core clipboard monitoring, history and persistence"""
