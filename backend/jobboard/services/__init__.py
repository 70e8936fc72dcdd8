"""Domain services"""
