"""Dashboard statistics"""
