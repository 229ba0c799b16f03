"""Service catalog domain - bookable service offerings"""
