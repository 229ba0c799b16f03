"""Customer vehicles"""
