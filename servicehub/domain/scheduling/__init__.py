"""
Scheduling Domain

Turns a (service, date, slot) choice into a concrete appointment schedule.

- time_calculator.py: fixed half-hour slots and end-time derivation
- schemas.py / router.py: slot listing and planning endpoints

No capacity or double-booking check happens here; overlapping appointments are
detected (optionally) when an employee is assigned, see domain/assignments.
"""
