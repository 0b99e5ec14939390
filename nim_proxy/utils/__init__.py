"""Streaming and response transcoding utilities"""
