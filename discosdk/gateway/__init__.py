"""Gateway intents, payloads, typed events, event dispatch and a state cache."""