"""Progress domain - stage/percentage history, time logs and work timers"""
