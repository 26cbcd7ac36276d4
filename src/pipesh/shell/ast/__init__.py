from pipesh.shell.ast.stages import Code, Command, Linebreak, Pipe, Redirect, Stage, Whitespace
