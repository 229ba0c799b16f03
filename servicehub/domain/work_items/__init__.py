"""Work item domain - appointments and projects under one lifecycle"""
