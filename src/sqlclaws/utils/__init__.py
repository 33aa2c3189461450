"""Escaping, sanitizing and coercion helpers"""
