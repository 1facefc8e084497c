"""Shared utilities for LayerLine"""
