# Role: Process-wide singletons shared by the HTTP routers (one FlowController, one in-memory session store).

from order_bot.core.flow_controller import FlowController

flow_controller = FlowController()
