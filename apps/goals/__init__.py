"""
Goals App - Recurring Group Goals

Members set goals such as "gym at least once every 3 days" and log
completions. Whether a member is on track is derived on read from their
latest completion; nothing is scheduled.
"""
