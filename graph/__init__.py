"""Graph data model for definitions, references and source units."""
