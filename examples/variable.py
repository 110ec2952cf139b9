"""
A local variable that becomes positive and then negative.
"""


def run():
    value = 0
    value += 1
    value -= 2
    return value


run()
