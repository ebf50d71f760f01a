"""Class attendance package.

Organized by feature modules (roster import, lists, reports) with a thin Flask
controller layer over service/repository layers.
"""
