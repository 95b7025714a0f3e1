"""Protobuf wire contracts of the agents dbspine talks to."""
