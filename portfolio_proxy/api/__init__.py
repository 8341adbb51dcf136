"""http api"""
