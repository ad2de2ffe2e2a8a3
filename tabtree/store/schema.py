SCHEMA_VERSION = 1

CREATE_COMMAND = """
    CREATE TABLE IF NOT EXISTS command (
        uuid TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        parent_cmd TEXT,
        FOREIGN KEY(parent_cmd) REFERENCES command(uuid) ON DELETE CASCADE
    );
    CREATE UNIQUE INDEX IF NOT EXISTS command_root_name_idx
        ON command (name) WHERE parent_cmd IS NULL;
    CREATE UNIQUE INDEX IF NOT EXISTS command_parent_name_idx
        ON command (parent_cmd, name);
"""

CREATE_COMMAND_ALIAS = """
    CREATE TABLE IF NOT EXISTS command_alias (
        uuid TEXT PRIMARY KEY,
        cmd_uuid TEXT NOT NULL,
        name TEXT NOT NULL,
        FOREIGN KEY(cmd_uuid) REFERENCES command(uuid) ON DELETE CASCADE
    );
    CREATE INDEX IF NOT EXISTS command_alias_name_idx
        ON command_alias (name);
    CREATE UNIQUE INDEX IF NOT EXISTS command_alias_cmd_name_idx
        ON command_alias (cmd_uuid, name);
"""

CREATE_COMMAND_ARG = """
    CREATE TABLE IF NOT EXISTS command_arg (
        uuid TEXT PRIMARY KEY,
        cmd_uuid TEXT NOT NULL,
        arg_type TEXT NOT NULL
            CHECK (arg_type IN ('NONE', 'OPTION', 'FILE', 'TEXT')),
        description TEXT NOT NULL,
        long_name TEXT,
        short_name TEXT,
        FOREIGN KEY(cmd_uuid) REFERENCES command(uuid) ON DELETE CASCADE,
        CHECK ((long_name IS NOT NULL) OR (short_name IS NOT NULL))
    );
    CREATE INDEX IF NOT EXISTS command_arg_cmd_uuid_idx
        ON command_arg (cmd_uuid);
    CREATE UNIQUE INDEX IF NOT EXISTS command_arg_longname_idx
        ON command_arg (cmd_uuid, long_name);
"""

CREATE_COMMAND_OPT = """
    CREATE TABLE IF NOT EXISTS command_opt (
        uuid TEXT PRIMARY KEY,
        cmd_arg_uuid TEXT NOT NULL,
        name TEXT NOT NULL,
        FOREIGN KEY(cmd_arg_uuid) REFERENCES command_arg(uuid) ON DELETE CASCADE
    );
    CREATE UNIQUE INDEX IF NOT EXISTS command_opt_arg_name_idx
        ON command_opt (cmd_arg_uuid, name);
"""

# Root commands are matched by name or by any of their aliases
READ_ROOT_COMMAND = """
    SELECT c.uuid, c.name, c.parent_cmd
    FROM command c
    LEFT JOIN command_alias a ON a.cmd_uuid = c.uuid
    WHERE c.parent_cmd IS NULL AND (c.name = ?1 OR a.name = ?1)
    ORDER BY c.name = ?1 DESC
    LIMIT 1
"""

READ_ROOT_COMMAND_NAMES = """
    SELECT c.name FROM command c WHERE c.parent_cmd IS NULL ORDER BY c.name
"""

READ_ALIASES = """
    SELECT a.uuid, a.cmd_uuid, a.name
    FROM command_alias a
    WHERE a.cmd_uuid = ?1
    ORDER BY a.name
"""

READ_SUB_COMMANDS = """
    SELECT c.uuid, c.name, c.parent_cmd
    FROM command c
    WHERE c.parent_cmd = ?1
    ORDER BY c.name
"""

READ_ARGS = """
    SELECT ca.uuid, ca.cmd_uuid, ca.arg_type, ca.description, ca.long_name,
        ca.short_name
    FROM command_arg ca
    WHERE ca.cmd_uuid = ?1
    ORDER BY ca.long_name, ca.short_name
"""

READ_OPTS = """
    SELECT co.uuid, co.cmd_arg_uuid, co.name
    FROM command_opt co
    WHERE co.cmd_arg_uuid = ?1
    ORDER BY co.name
"""

WRITE_COMMAND = "INSERT INTO command (uuid, name, parent_cmd) VALUES (?1, ?2, ?3)"

WRITE_ALIAS = "INSERT INTO command_alias (uuid, cmd_uuid, name) VALUES (?1, ?2, ?3)"

WRITE_ARG = """
    INSERT INTO command_arg
        (uuid, cmd_uuid, arg_type, description, long_name, short_name)
    VALUES (?1, ?2, ?3, ?4, ?5, ?6)
"""

WRITE_OPT = "INSERT INTO command_opt (uuid, cmd_arg_uuid, name) VALUES (?1, ?2, ?3)"

DELETE_ROOT_COMMAND = "DELETE FROM command WHERE parent_cmd IS NULL AND name = ?1"
