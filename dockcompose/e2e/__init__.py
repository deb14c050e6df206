"""Harness for end-to-end tests of the container CLI and its compose plugin."""