"""Employees, workload and assignment policy"""
