"""Bucket and object checks"""
