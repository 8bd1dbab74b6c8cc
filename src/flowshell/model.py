# src/flowshell/model.py (Shell Layer)
from pydantic import BaseModel, ConfigDict, Field


class FunctionDefinition(BaseModel):
    """A user-defined function: a named command line run with its own @{argv}."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(description="The name the function is invoked by.")
    body: str = Field(description="The command line executed when the function is called.")
    description: str = Field(description="A brief explanation of what the function does.", default="")
